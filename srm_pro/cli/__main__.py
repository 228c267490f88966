from srm_pro.cli.main import main

main()
