from nomoredm.app import main

main()
