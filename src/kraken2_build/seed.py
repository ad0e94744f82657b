from kraken2_build.exceptions import ConfigurationError


def max_minimizer_spaces(minimizer_len: int) -> int:
    # spaced positions are capped at a quarter of the minimizer
    return minimizer_len // 4


def build_seed_template(minimizer_len: int, minimizer_spaces: int) -> str:
    """
    Build the spaced seed mask handed to the hash table builder.

    The mask starts with ``minimizer_len - 2 * minimizer_spaces`` care
    positions followed by ``minimizer_spaces`` repetitions of ``01``, so
    ``build_seed_template(31, 7)`` is 17 ones then ``01`` seven times.
    Each ``0`` marks a minimizer position ignored during comparison.
    """
    max_spaces = max_minimizer_spaces(minimizer_len)

    if minimizer_spaces < 0:
        raise ConfigurationError(
            "minimizer_spaces",
            f"Can't use negative minimizer-spaces of {minimizer_spaces}",
        )

    if minimizer_spaces > max_spaces:
        raise ConfigurationError(
            "minimizer_spaces",
            f"minimizer-spaces ({minimizer_spaces}) "
            f"> max allowable ({max_spaces})",
        )

    core_len = minimizer_len - 2 * minimizer_spaces

    return "1" * core_len + "01" * minimizer_spaces
