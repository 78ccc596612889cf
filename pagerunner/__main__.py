from pagerunner.cli import main

main()
