"""Cryptographic constants for ecvault."""

# Shared info folded into the KDF for every ECIES envelope (64 bytes)
IES_DERIVATION = bytes.fromhex(
    "0c86e4e8c3e45451fa3f07a78734c569b36685001d39ed6ac120ab23dfcc57ac"
    "b17f2dcce0e00a89b8e3745f402a07f54d3faff85d97b42e608f92c5ce516968"
)

# Encoding parameter appended to the ciphertext before MAC computation (64 bytes)
IES_ENCODING = bytes.fromhex(
    "d3a39c7453cfc4358b196e9f95e3ac42ebebaa4396f0702228bb43fb070a4845"
    "3042d83a65fe9c118e381ae52006a79f90040253c1b2aea59dd9d6218db8986f"
)

# AES-256 constants
AES_KEY_SIZE = 32
AES_BLOCK_SIZE = 16
CIPHER_KEY_BITS = AES_KEY_SIZE * 8

# KDF digest output width, identical for every security level
KDF_DIGEST_BITS = 512

# PBKDF2-HMAC-SHA256 salt (64 bytes)
PBKDF_SALT = bytes.fromhex(
    "3bb492359e516443a67189e0fbc32cf708946baa7683baa23b9687ee0f0c0cb3"
    "6c467d17b14212cd433735e4dda4ca259b39648029186be796499492de9ac94a"
)

# Substituted for a missing password, then appended to every password
PBKDF_EMPTY_PASSWORD = '@GSr:p"[dZR6RU;B:s&;4P<3XHPl@"|r9*Az w#:'
PBKDF_PEPPER = ",k~m:@HXE-a%%7 c](8J|Yu{d\"`./DK_f'z }^'S"

# PKCS#12 password-based encryption
PBE_SALT_PREFIX_SIZE = 12
PBE_FIXED_SALT = bytes.fromhex(
    "e63216b8d6a0508b87e394028cee40a79d5190939e7361dfe92839351339d0cb"
    "5bb603857d512a2c2071c2906926ba5a29012c3b"
)
PBE_ITERATIONS = 1 << 12
# Truncated SHA-256 of the plaintext, encrypted in front of it
PBE_CHECK_SIZE = 8

# Obfuscation salt prepended in the clear
OBFUSCATION_SALT_SIZE = 6
