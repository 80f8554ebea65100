import sys

import atheris

with atheris.instrument_imports():
    from caldi.assistant.numbers import normalize_number_words
    from caldi.calc import CalcError, evaluate_source


def TestOneInput(data: bytes) -> None:
    """Fuzz spoken-number normalization followed by evaluation."""
    value = data.decode("utf-8", errors="ignore")

    normalized = normalize_number_words(value)
    # Normalizing twice must be stable
    assert normalize_number_words(normalized) == normalized

    try:
        evaluate_source(normalized)
    except CalcError:
        pass  # Expected for input without a usable expression


def main() -> None:
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
