import Dir_Digest.cli.digest as digest_cli


def main():
    digest_cli.main(prog_name="dir-digest")


if __name__ == "__main__":
    main()
