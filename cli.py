import pathlib
import sys
sys.path.append(str(pathlib.Path(__file__).parent / "src"))

if __name__ == "__main__":
    from storls.boot import init_storls
    from storls.cli.commands import main

    init_storls("cli")

    main()
