from __future__ import annotations

import logging
from typing import Callable, Optional

from .analyzer import DocumentAnalyzer
from .errors import AnalysisError, ExtractionError
from .extractor import PaperExtractor
from .io import DocumentPayload
from .models import SessionSnapshot
from .responses import is_unreadable
from .session import CONTENT_UNREADABLE, Session, SessionStore

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[SessionSnapshot], None]


def _publish(
    store: SessionStore, session: Session, on_update: Optional[UpdateCallback]
) -> bool:
    snapshot = store.publish(session)
    if snapshot is None:
        return False
    if on_update is not None:
        on_update(snapshot)
    return True


def run_session(
    store: SessionStore,
    document: DocumentPayload,
    analyzer: DocumentAnalyzer,
    extractor: PaperExtractor,
    on_update: Optional[UpdateCallback] = None,
) -> SessionSnapshot:
    """Analyze the document, then extract every paper strictly one at a time.

    A snapshot is published after every transition. If the store moves on to
    another session while a request is in flight, the late result is discarded
    and no further requests are made.
    """
    session = store.new_session()
    session.begin_analysis()
    _publish(store, session, on_update)

    try:
        papers = analyzer.analyze(document)
    except AnalysisError as e:
        session.analysis_failed(str(e))
        _publish(store, session, on_update)
        return session.snapshot()

    session.analysis_succeeded(papers)
    if not _publish(store, session, on_update):
        return session.snapshot()

    for position, item in enumerate(session.results):
        session.mark_processing(position)
        if not _publish(store, session, on_update):
            break

        meta = item.metadata
        try:
            content = extractor.extract(document, meta)
        except ExtractionError as e:
            session.mark_error(position, str(e))
        else:
            if is_unreadable(content):
                logger.warning(f"Paper {meta.index} flagged unreadable by the model")
                session.mark_error(position, CONTENT_UNREADABLE)
            else:
                session.mark_success(position, content)

        if not _publish(store, session, on_update):
            logger.info(f"Session {session.session_id} was reset; stopping")
            break
        logger.info(
            f"Paper {meta.index} ({position + 1}/{len(session.results)}): "
            f"{item.status.value}"
        )
    else:
        session.finish()
        _publish(store, session, on_update)

    return session.snapshot()
