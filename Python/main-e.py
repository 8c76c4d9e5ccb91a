# Bradford Arrington 2025
import sys

from huffmain import expand_main

if __name__ == '__main__':
    sys.exit(expand_main(sys.argv))
