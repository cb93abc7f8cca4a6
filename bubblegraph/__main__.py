from bubblegraph.app import main

main()
