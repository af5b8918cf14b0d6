"""Minimal LSP server for jslex: lexer diagnostics only."""

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

from jslex import __version__
from jslex.errors import LexDiagnostic
from jslex.lexer import lex
from jslex.tokens import position_at

server = LanguageServer("jslex-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full)


def to_lsp_diagnostic(diag: LexDiagnostic, source: str) -> Diagnostic:
    """Convert a lexer diagnostic to LSP form (0-based lines and characters)."""
    start = position_at(source, diag.span.start)
    end = position_at(source, diag.span.end)
    return Diagnostic(
        range=Range(
            start=Position(line=start.line - 1, character=start.column - 1),
            end=Position(line=end.line - 1, character=end.column - 1),
        ),
        message=diag.message,
        severity=DiagnosticSeverity.Warning if diag.is_legacy else DiagnosticSeverity.Error,
        source="jslex",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Lex the document and publish its diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    _, errors = lex(source)
    diagnostics = [to_lsp_diagnostic(e, source) for e in errors]
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
