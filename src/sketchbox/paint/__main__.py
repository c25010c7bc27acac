from sketchbox.paint.app import main

main()
