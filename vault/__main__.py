from vault.main import main

main()
