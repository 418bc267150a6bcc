# main.py

from smart_sorter.main import main

if __name__ == '__main__':
    main()
