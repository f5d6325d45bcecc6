from feature_status.cli import main

main()
