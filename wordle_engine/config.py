"""Engine defaults. Constructors take these as keyword argument defaults."""

CONFIG = {
    # Game shape
    "word_length": 5,
    "max_turns": 6,

    # Guess selection
    "budget": 500,              # guesses fully scored per selection
    "top_n": 10,                # ranked guesses shown in reports
    "scorer": "entropy",        # entropy | expected | worst
    "list_candidates_max": 16,  # list candidate names at or below this count

    # Strategy tables
    "strategy_format": 1,
    "strategy_min_candidates": 15,
    "strategy_max_depth": 2,

    # Simulation
    "random_seed": 42,
}
