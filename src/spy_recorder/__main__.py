"""Allow ``python -m spy_recorder``."""

from spy_recorder.cli import app


def main() -> None:
    app(prog_name="spy-recorder")


if __name__ == "__main__":
    main()
