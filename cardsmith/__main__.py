from cardsmith.cli.main import main

main()
