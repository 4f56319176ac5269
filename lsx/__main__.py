from lsx.main import main

main()
