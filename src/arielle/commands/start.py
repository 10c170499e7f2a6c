"""The ``arielle start`` command.

Runs the spec pipeline, shows what was found, writes the extraction
artifact and then, depending on the flags, indexes the endpoint documents
and answers questions about them::

    arielle start --spec ./petstore.yaml --no-index
    arielle start -s https://example.com/openapi.json --search "how do I add a pet?"
    arielle start -s ./petstore.yaml --chat
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import typer

from arielle.exceptions import ArielleError, ProviderError
from arielle.exit_codes import EXIT_GENERIC_FAILURE
from arielle.llm.base import LLMProvider
from arielle.models import AppConfig, APIInfo, EnrichedEndpoint, SessionAnswer
from arielle.output import OutputManager
from arielle.vector.store import VectorStore

if TYPE_CHECKING:
    from arielle.query.session import QuerySession

_EXIT_WORDS = frozenset({"exit", "quit"})


# --- Display ---


def show_api_summary(api_info: APIInfo, output: OutputManager) -> None:
    """Print the API title, version and metadata to stderr."""
    output.success(f"Loaded {api_info.title} v{api_info.version}")
    if api_info.description:
        output.info(api_info.description.strip().split("\n\n")[0])
    contact = [api_info.contact_name, api_info.contact_email, api_info.contact_url]
    if any(contact):
        output.info(f"Contact: {', '.join(part for part in contact if part)}")
    if api_info.license_name:
        output.info(f"License: {api_info.license_name}")
    if api_info.terms_of_service:
        output.info(f"Terms of service: {api_info.terms_of_service}")
    output.info(f"Endpoints: {api_info.endpoint_count}")


def show_endpoint_table(endpoints: list[EnrichedEndpoint], output: OutputManager) -> None:
    """Print the endpoints grouped by first tag as a table on stdout."""
    from arielle.parser.processor import group_by_tag

    rows: list[list[str]] = []
    for tag, group in group_by_tag(endpoints).items():
        for endpoint in group:
            summary = endpoint.summary or endpoint.purpose
            if endpoint.deprecated:
                summary = f"{summary} (deprecated)"
            rows.append([tag, endpoint.method.value, endpoint.path, summary])
    output.print_table(["Tag", "Method", "Path", "Summary"], rows, title="Endpoints")


def show_answer(answer: SessionAnswer, output: OutputManager) -> None:
    """Print an answer as Markdown, then any partial-failure report as a warning."""
    output.print_markdown(answer.answer)
    if answer.diagnostics:
        output.warning(answer.diagnostics)


# --- Orchestration ---


async def run_start(
    source: str,
    config: AppConfig,
    output: OutputManager,
    *,
    index: bool = True,
    clear_cache: bool = False,
    search: Optional[str] = None,
    chat: bool = False,
    provider: Optional[LLMProvider] = None,
    store: Optional[VectorStore] = None,
) -> None:
    """Run the whole ``start`` flow.

    *provider* and *store* are built from *config* when not supplied.

    Raises:
        ArielleError: On any fatal error (unloadable spec, unconfigured
            provider, unreachable vector store, ...).
        OSError: If the extraction artifact cannot be written.
    """
    from arielle.export import save_extraction
    from arielle.pipeline import run_pipeline

    result = await run_pipeline(source, output)
    show_api_summary(result.api_info, output)
    show_endpoint_table(result.endpoints, output)

    artifact = save_extraction(result.extracted, result.documents, config.output_dir)
    output.success(f"Saved {len(result.documents)} endpoint records to {artifact}")

    if not (index or clear_cache or search or chat):
        return

    if provider is None:
        from arielle.llm.factory import create_provider

        provider = create_provider(config.llm, output)
    if not provider.is_configured():
        raise ProviderError(
            f"LLM provider '{provider.provider_name}' is not configured "
            "(missing API key). Set llm.api_key_source or the provider's API key variable."
        )
    if store is None:
        from arielle.vector.store import ChromaVectorStore

        store = ChromaVectorStore(config.vector_store, output)

    if clear_cache:
        with output.status("Clearing vector cache..."):
            deleted = await store.delete()
        output.success(f"Removed {deleted} documents from the vector cache")

    if index:
        from arielle.vector.indexer import index_documents

        output.info(
            f"Indexing {len(result.documents)} documents with {provider.embedding_model}..."
        )
        report = await index_documents(
            result.documents,
            result.extracted,
            provider,
            store,
            output,
            batch_size=config.vector_store.batch_size,
        )
        output.success(f"Indexed {len(report.indexed)} of {report.total} documents")

    if search or chat:
        from arielle.query.session import QuerySession

        session = QuerySession(
            provider,
            store,
            output,
            conversation_config=config.conversation,
            top_k=config.vector_store.top_k,
        )
        if search:
            with output.status("Thinking..."):
                answer = await session.process_query(search)
            show_answer(answer, output)
        if chat:
            await chat_loop(session, output)


async def chat_loop(session: QuerySession, output: OutputManager) -> None:
    """Read questions until ``exit`` or ``quit`` and answer each one.

    A failing question is reported and the loop continues.
    """
    output.info("Ask questions about the API. Type 'exit' or 'quit' to end the conversation.")
    while True:
        question = await asyncio.to_thread(
            typer.prompt, "You", default="", show_default=False
        )
        question = question.strip()
        if question.lower() in _EXIT_WORDS:
            output.info("Goodbye!")
            return
        if not question:
            continue
        try:
            with output.status("Thinking..."):
                answer = await session.process_query(question)
        except ArielleError as exc:
            output.error(str(exc))
            continue
        show_answer(answer, output)


# --- Typer command ---


def start_command(
    spec: Optional[str] = typer.Option(
        None, "--spec", "-s", help="Path or URL of the OpenAPI 3.0 spec."
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Directory for the extraction artifact."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    index: bool = typer.Option(
        True, "--index/--no-index", help="Index endpoint documents in the vector store."
    ),
    clear_cache: bool = typer.Option(
        False, "--clear-cache", help="Delete every indexed document before indexing."
    ),
    search: Optional[str] = typer.Option(
        None, "--search", "-S", help="Ask one question about the API."
    ),
    embedding_model: Optional[str] = typer.Option(
        None, "--embedding-model", help="Embedding model override."
    ),
    provider: Optional[str] = typer.Option(
        None, "--provider", help="LLM provider: openai, google or ollama."
    ),
    model: Optional[str] = typer.Option(
        None, "--model", help="Completion model override."
    ),
    chat: bool = typer.Option(
        False, "--chat", help="Start an interactive question loop."
    ),
) -> None:
    """Load an OpenAPI spec, index its endpoints, and answer questions about it.

    Args:
        spec: Spec file path or URL; prompted for when omitted.
        output_dir: Where the extraction artifact is written.
        verbose: Enable debug-level diagnostics.
        quiet: Suppress informational diagnostics.
        no_color: Disable colour.
        index: Embed and upsert the endpoint documents.
        clear_cache: Empty the collection first.
        search: A single question to answer after indexing.
        embedding_model: Embedding model override.
        provider: LLM provider override.
        model: Completion model override.
        chat: Enter the interactive conversation loop.
    """
    from arielle.config import resolve_config

    output = OutputManager(no_color=no_color, quiet=quiet, verbose=verbose)

    try:
        config = resolve_config(
            cli_provider=provider,
            cli_model=model,
            cli_embedding_model=embedding_model,
            cli_output_dir=str(output_dir) if output_dir is not None else None,
            cli_verbose=verbose,
        )
    except ArielleError as exc:
        output.error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if config.verbose and not verbose:
        output = OutputManager(no_color=no_color, quiet=quiet, verbose=True)

    if not spec:
        spec = typer.prompt("Path or URL of your OpenAPI spec")

    try:
        asyncio.run(
            run_start(
                spec,
                config,
                output,
                index=index,
                clear_cache=clear_cache,
                search=search,
                chat=chat,
            )
        )
    except ArielleError as exc:
        output.error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    except OSError as exc:
        output.error(f"I/O error: {exc}")
        raise typer.Exit(code=EXIT_GENERIC_FAILURE) from None
