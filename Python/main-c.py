# Bradford Arrington 2025
import sys

from huffmain import compress_main

if __name__ == '__main__':
    sys.exit(compress_main(sys.argv))
