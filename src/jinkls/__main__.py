from jinkls.cli import main

main()
