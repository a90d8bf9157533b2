from gitflow.cli.app import main

main()
