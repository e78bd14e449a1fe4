"""
Wordle Engine
=============

Entropy-ranked guess selection, candidate filtering and self-play
simulation for Wordle-style games.
"""

__version__ = "1.0.0"

from .errors import InvalidLength, MalformedLexicon, MalformedStrategy, NoCandidates
from .filter import filter_candidates
from .history import GuessRecord, history_for_answer, parse_history
from .lexicon import Lexicon, load_words
from .response import ResponseCode, evaluate, parse_response, response_to_string
from .scoring import score
from .review import GameReview, review_game
from .selector import GuessSelector, assess, select
from .simulator import SimulationResult, build_strategy_table, print_results, simulate
from .strategy import StrategyTable, state_key
