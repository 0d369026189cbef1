# Field limits shared by table models and request validation
NAME_MAX_LENGTH = 255
TITLE_MAX_LENGTH = 255
IMAGE_PATH_MAX_LENGTH = 512

# Id columns and JSON integers are 32-bit
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# Letters only, single spaces between words
NAME_PATTERN = r"^[a-zA-Z]+( [a-zA-Z]+)*$"

# Image uploads
MAX_IMAGE_SIZE_BYTES = 2 * 1024 * 1024
ALLOWED_IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"})
DEFAULT_IMAGE_EXTENSION = ".jpg"

CORRELATION_ID_HEADER = "X-Correlation-ID"
CORRELATION_ID_LENGTH = 8
