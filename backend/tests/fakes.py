"""
Fakes for the storage, memory store and agent collaborators.
"""

from citebase.models.documents import StorageResult, UploadCandidate
from citebase.models.queries import AgentRunResult


class FakeStorage:
    """Records every put(); fails for names listed in ``fail``."""

    def __init__(self, fail=(), raise_for=()):
        self.fail = set(fail)
        self.raise_for = set(raise_for)
        self.calls = []

    def put(self, namespace, document_name, content, content_type, metadata):
        self.calls.append({
            "namespace": namespace,
            "document_name": document_name,
            "content": content,
            "content_type": content_type,
            "metadata": metadata,
        })
        if document_name in self.raise_for:
            raise RuntimeError("connection reset")
        if document_name in self.fail:
            return StorageResult(ok=False, status_code=503, status_text="Service Unavailable")
        return StorageResult(ok=True)


class FakeMemoryStore:
    def __init__(self, payload=None, error=None):
        self.payload = [] if payload is None else payload
        self.error = error
        self.calls = []

    def retrieve(self, memory_name, query, top_k):
        self.calls.append((memory_name, query, top_k))
        if self.error:
            raise self.error
        return self.payload


class FakeAgent:
    def __init__(self, result=None):
        self.result = result if result is not None else AgentRunResult(completion="The answer [1].")
        self.calls = []

    def run_pipe(self, name, messages):
        self.calls.append((name, messages))
        return self.result


def make_candidate(name, content=b"hello"):
    return UploadCandidate(name=name, content=content)


def memory_item(text, filename=None, url=None):
    meta = {}
    if filename:
        meta["originalFilename"] = filename
    if url:
        meta["url"] = url
    return {"text": text, "similarity": 0.9, "meta": meta}


