from forge_cli import main

main()
