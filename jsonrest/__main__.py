from jsonrest.cli import main

main()
