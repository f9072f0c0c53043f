from modedit.app import main

main()
