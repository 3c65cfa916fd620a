from fluent_sqlite.cli import main

main()
