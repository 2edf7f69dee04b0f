from range_bench.cli.main import main

main()
