from avalon_tracker.cli import main

main()
