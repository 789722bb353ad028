"""Default configuration constants for ecvault."""

# Key generation
DEFAULT_KEY_SIZE = 320

# PBKDF2 settings
DEFAULT_PBKDF_ITERATIONS = 1 << 14

# Deterministic PRNG settings (64 x 528 bit of seed material)
DETERMINISTIC_RANDOM_ITERATIONS = 1536
DETERMINISTIC_RANDOM_SIZE = 4224

# Length of the password derived from a human password for private keystores
STORE_PASSWORD_LENGTH = 50

# Keystore file names
ENCODER_KEYSTORE_NAME = "encoder_keystore.xml"
DECODER_KEYSTORE_NAME = "decoder_keystore.xml"
PASSWORDS_FILE_NAME = "passwords.txt"
