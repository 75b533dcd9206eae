from fig.common import Entry, NullPredicateError, PreconditionError
from fig.hash import Hash
from fig.seq import Seq, SeqView

__all__ = [
    "Entry",
    "Hash",
    "NullPredicateError",
    "PreconditionError",
    "Seq",
    "SeqView",
]
