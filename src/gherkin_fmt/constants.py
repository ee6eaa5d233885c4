ALIGN_LEFT = 'left'
ALIGN_RIGHT = 'right'
ALIGNMENTS = (ALIGN_LEFT, ALIGN_RIGHT)

DEFAULT_INDENT = 2
DEFAULT_ALIGN = ALIGN_LEFT

# decimal, not octal. only used if the file does not exist when it is written
FILE_MODE = 666

DOC_STRING_DELIMITER = '"""'

DEFAULT_LANGUAGE = 'en'
