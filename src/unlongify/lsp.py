"""Minimal LSP server for unlongify — diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from unlongify.errors import ScanError
from unlongify.preview import changes
from unlongify.rewriter import rewrite

server = LanguageServer("unlongify-lsp", "0.1.0", text_document_sync_kind=TextDocumentSyncKind.Full)


def _validate(ls: LanguageServer, uri: str) -> None:
    """Rewrite the document in memory and publish what would change."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    diagnostics: list[Diagnostic] = []

    try:
        rewritten = rewrite(source, filename)
    except ScanError as exc:
        line = exc.position.line - 1
        col = exc.position.column - 1
        diagnostics.append(
            Diagnostic(
                range=Range(
                    start=Position(line=line, character=col),
                    end=Position(line=line, character=col + 1),
                ),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="unlongify",
            )
        )
    else:
        for change in changes(source, rewritten):
            # Pure deletions still get a one-line range
            end_line = max(change.end_line, change.start_line + 1)
            new = change.new.rstrip("\n") or "(removed)"
            diagnostics.append(
                Diagnostic(
                    range=Range(
                        start=Position(line=change.start_line, character=0),
                        end=Position(line=end_line, character=0),
                    ),
                    message=f"would rewrite to: {new}",
                    severity=DiagnosticSeverity.Information,
                    source="unlongify",
                )
            )

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
