"""
Seeding package: natural-key upserts and dependency-ordered batches.
"""

from .keys import CategoryKey, SubcategoryKey, QuestionKey, UserKey, question_fingerprint
from .records import CategoryRecord, SubcategoryRecord, AnswerRecord, QuestionRecord, UserRecord
from .validation import RecordValidator
from .lookup import NaturalKeyLookup
from .materializer import EntityMaterializer
from .upsert import UpsertOrchestrator, MergePolicy, Outcome, SeedStats
from .batch import Batch, BatchRegistry, BatchResult, BatchState, default_registry
from .context import SeedContext
from .scheduler import resolve_order, select_batches
from .runner import BatchRunner, RunReport
from .fixture_loader import load_fixture_file, discover_batches, BUILTIN_FIXTURE_DIR

__all__ = [
    'CategoryKey',
    'SubcategoryKey',
    'QuestionKey',
    'UserKey',
    'question_fingerprint',
    'CategoryRecord',
    'SubcategoryRecord',
    'AnswerRecord',
    'QuestionRecord',
    'UserRecord',
    'RecordValidator',
    'NaturalKeyLookup',
    'EntityMaterializer',
    'UpsertOrchestrator',
    'MergePolicy',
    'Outcome',
    'SeedStats',
    'Batch',
    'BatchRegistry',
    'BatchResult',
    'BatchState',
    'default_registry',
    'SeedContext',
    'resolve_order',
    'select_batches',
    'BatchRunner',
    'RunReport',
    'load_fixture_file',
    'discover_batches',
    'BUILTIN_FIXTURE_DIR',
]
