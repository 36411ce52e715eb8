from setexport.cli import main

main()
