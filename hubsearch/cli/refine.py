import json
import sys
from pathlib import Path
from time import time
from typing import Callable

from dotenv import load_dotenv
from loguru import logger

from hubsearch.clients.errors import ApiError
from hubsearch.clients.schemas import SearchResponse
from hubsearch.session.orchestrator import SessionOrchestrator, build_orchestrator
from hubsearch.session.types import SessionState
from hubsearch.utils.env_cfg import load_api_env, load_path_env
from hubsearch.utils.logging_cfg import setup_logging


def get_workspaces(default: tuple[str, ...] = ()) -> list[str]:
    """
    Prompts the user for the workspaces to search.

    Args:
        default (tuple[str, ...], optional): Workspaces used when the answer is empty. Defaults to ().

    Returns:
        list[str]: The workspace ids.
    """
    hint = f" [{', '.join(default)}]" if default else ""
    answer = input(f"Workspaces (comma-separated){hint}: ").strip()
    if not answer:
        return list(default)
    return [w.strip() for w in answer.split(",") if w.strip()]


def refine_query(
    orchestrator: SessionOrchestrator,
    ask: Callable[[str], str] = input,
    say: Callable[[str], None] = print,
) -> str | None:
    """
    Runs the clarification dialogue until the backend returns a refined query.

    Args:
        orchestrator (SessionOrchestrator): The session driver.
        ask (Callable[[str], str], optional): Reads one line from the user. Defaults to input.
        say (Callable[[str], None], optional): Shows one line to the user. Defaults to print.

    Returns:
        str | None: The query to search with, or None if the user gave up.
    """
    prompt = "What are you looking for? "
    while orchestrator.state is not SessionState.COMPLETE:
        text = ask(prompt).strip()
        if not text:
            say("Stopped.")
            return None
        outcome = orchestrator.submit_text(text)
        if outcome.error:
            say(outcome.error)
            continue
        if outcome.question:
            prompt = f"{outcome.question} "

    refined = orchestrator.refined_query or ""
    say(f"Refined query: {refined}")
    edited = ask("Press enter to search, or type a new query: ").strip()
    return orchestrator.handoff(edited or None).query


def _store_output(filename: str, data: SearchResponse, output_path: str | Path) -> Path:
    """
    Stores a search response to a JSON file.

    Args:
        filename (str): The name of the output file (without extension).
        data (SearchResponse): The response to store.
        output_path (str | Path): The directory to store the output file.

    Returns:
        Path: The written file.
    """
    if not isinstance(output_path, Path):
        output_path = Path(output_path).expanduser()

    if not output_path.exists():
        logger.info("Creating output directory at {}", output_path)
        output_path.mkdir(parents=True, exist_ok=True)

    target = output_path / f"{filename}.json"
    with open(target, "w", encoding="utf-8") as f:
        json.dump(data.model_dump(mode="json"), f, ensure_ascii=False, indent=2)
    logger.info("Results stored in {}", target)
    return target


def print_results(result: SearchResponse, say: Callable[[str], None] = print) -> None:
    """
    Prints ranked matches.

    Args:
        result (SearchResponse): The search response.
        say (Callable[[str], None], optional): Output function. Defaults to print.
    """
    if result.response:
        say(result.response)
    if not result.profiles:
        say("No matches found.")
        return
    for rank, person in enumerate(result.profiles, start=1):
        line = f"{rank}. {person.name}"
        if person.headline:
            line += f" | {person.headline}"
        if person.current_company:
            line += f" @ {person.current_company}"
        say(line)
        if person.reason:
            say(f"   {person.reason}")


def main() -> None:
    """
    Main entry point for the CLI. Refines a query interactively, searches, and stores the result.
    """
    load_dotenv()
    setup_logging(level="WARNING")
    api_config = load_api_env()
    orchestrator = build_orchestrator(api_config)

    query = refine_query(orchestrator)
    if query is None:
        return

    workspaces = get_workspaces(api_config.workspace_ids)
    try:
        result = orchestrator.search(workspaces, edited_query=query)
    except ApiError as e:
        logger.error("Search failed: {}", e)
        print(f"Search failed: {e}")
        sys.exit(1)

    print_results(result)
    _store_output(
        filename=f"{int(time())}_{orchestrator.session_id or 'search'}",
        data=result,
        output_path=load_path_env().results,
    )


if __name__ == "__main__":
    sys.path.append(str(Path(__file__).parents[2].resolve()))
    main()
