from spendflow.main import main

main()
