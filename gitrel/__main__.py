from gitrel.cli.app import main

main()
