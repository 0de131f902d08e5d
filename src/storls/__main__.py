from storls.boot import init_storls
from storls.cli.commands import main


def run():
    init_storls("cli")
    main()


if __name__ == "__main__":
    run()
