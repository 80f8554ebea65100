import sys

import atheris

with atheris.instrument_imports():
    from caldi.calc import CalcError, evaluate_source, render_error, tokenize
    from caldi.calc.lexer import TokenKind


def TestOneInput(data: bytes) -> None:
    """Fuzz the tokenizer, parser and evaluator with arbitrary input."""
    value = data.decode("utf-8", errors="ignore")

    tokens = tokenize(value)
    assert tokens[-1].kind is TokenKind.EOF
    assert sum(1 for token in tokens if token.kind is TokenKind.EOF) == 1

    try:
        result = evaluate_source(value)
    except CalcError as exc:
        # Rendering must point inside (or just past) the source line
        assert 0 <= exc.position <= len(value)
        render_error(exc, value)
        return
    assert isinstance(result, (int, float))


def main() -> None:
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
