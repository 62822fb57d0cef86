from funge.cli import main

main()
