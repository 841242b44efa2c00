from jxml.cli import main

main()
