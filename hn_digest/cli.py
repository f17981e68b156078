"""
Command-line interface for HN Digest
"""

import json
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone

import click
from prettytable import PrettyTable

from .comments import CommentExtractor, validate_thread_url
from .digest import HackerNewsDigest
from .fetchers import HackerNewsAPI
from .llm_client import OpenRouterClient
from .markdown import MarkdownConverter
from .models import ConversionOptions, SummarizerConfig
from .summarizers import ArticleSummarizer, DiscussionSummarizer
from .config import FALLBACK_MODELS, MAX_RETRIES
from .logging_config import LOG_LEVELS, setup_logging, get_logger


logger = get_logger("cli")


@contextmanager
def _output_stream(output):
    """Yield stdout, or the given file opened for writing."""
    if output is None or output == "-":
        yield click.get_text_stream("stdout")
        return
    logger.info(f"Writing output to: {output}")
    with open(output, "w", encoding="utf-8") as output_file:
        yield output_file


def _fail(error: Exception):
    logger.error(f"Command failed: {error}", exc_info=True)
    click.echo(f"Error: {error}", err=True)
    if "API key" in str(error):
        click.echo(
            "Hint: set OPENROUTER_API_KEY or add it to a .env file in the current directory.",
            err=True,
        )
    raise click.Abort()


def _check_thread_url(url: str):
    try:
        validate_thread_url(url)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="URL")


def _summarizer_config(model: str, fallback: bool) -> SummarizerConfig:
    return SummarizerConfig(model=model, allow_fallback=fallback)


def _write_posts_table(posts, output_file):
    table = PrettyTable()
    table.field_names = ["#", "Title", "Points", "Comments", "Author", "Link"]
    table.align["Title"] = "l"
    table.align["Link"] = "l"
    for i, post in enumerate(posts, 1):
        title = post.title if len(post.title) <= 60 else post.title[:57] + "..."
        table.add_row([i, title, post.points, post.comments_count, post.author or "anonymous", post.comments_link])
    click.echo(table.get_string(), file=output_file)


def _write_digest_markdown(entries, output_file):
    click.echo("# Hacker News Digest\n", file=output_file)
    for i, entry in enumerate(entries, 1):
        post = entry.post
        click.echo(f"## {i}. {post.title}\n", file=output_file)
        click.echo(f"{post.points} points | {post.comments_count} comments | by {post.author or 'anonymous'}\n", file=output_file)
        click.echo(f"- [Article]({post.link})", file=output_file)
        click.echo(f"- [Discussion]({post.comments_link})", file=output_file)
        if entry.paywall and entry.paywall.is_paywalled:
            if entry.paywall.url:
                click.echo(f"- Paywalled, [archived copy]({entry.paywall.url})", file=output_file)
            else:
                click.echo("- Probably paywalled", file=output_file)
        if entry.summary:
            click.echo(f"\n{entry.summary.strip()}", file=output_file)
        if entry.error:
            click.echo(f"\n_Not processed: {entry.error}_", file=output_file)
        click.echo("", file=output_file)


model_option = click.option(
    "--model",
    default=FALLBACK_MODELS[0],
    show_default=True,
    help="OpenRouter model id",
)
fallback_option = click.option(
    "--fallback/--no-fallback",
    default=False,
    help="Try the other free models if the chosen one fails (default: no fallback)",
)
output_option = click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output file (default: stdout)",
)


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    help="Set logging level (default: WARNING)",
)
@click.option(
    "--log-file",
    type=click.Path(),
    default=None,
    help="Also write logs to this file",
)
def main(log_level: str, log_file: str):
    """Hacker News reading tools: listings, comments, paywall hints, Markdown and LLM summaries"""
    setup_logging(level=log_level, log_file=log_file)


@main.command()
@click.option("--count", "-c", default=60, type=click.IntRange(1, 500), help="Number of top stories to fetch (default: 60)")
@click.option("--hours", type=click.IntRange(1), default=None, help="Only show posts from the last N hours")
@click.option("--limit", "-n", type=click.IntRange(1), default=None, help="Show at most N posts")
@click.option("--retries", default=MAX_RETRIES, type=click.IntRange(1, 10), help="Attempts per request (default: 3)")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default="table", help="Output format (default: table)")
@output_option
def top(count: int, hours, limit, retries: int, output_format: str, output):
    """List top Hacker News posts ordered by points"""
    try:
        posts = HackerNewsAPI(max_retries=retries).fetch_top_posts(count)
    except RuntimeError as e:
        _fail(e)

    if hours:
        cutoff = (datetime.now(timezone.utc) - timedelta(hours=hours)).timestamp()
        posts = [post for post in posts if post.time and post.time >= cutoff]
    if limit:
        posts = posts[:limit]

    with _output_stream(output) as output_file:
        if not posts:
            click.echo("No posts found.", file=output_file)
            return
        if output_format == "json":
            click.echo(json.dumps([post.to_dict() for post in posts], indent=2), file=output_file)
        else:
            _write_posts_table(posts, output_file)


@main.command()
@click.argument("url")
def paywall(url: str):
    """Check a discussion thread for signs of a paywalled article"""
    _check_thread_url(url)
    try:
        result = CommentExtractor().is_paywalled(url)
    except RuntimeError as e:
        _fail(e)

    if result.is_paywalled:
        click.echo(f"Paywalled: yes ({result.site or 'unknown site'})")
        if result.url:
            click.echo(f"Archive link: {result.url}")
        elif result.known_paywalled_site:
            click.echo("Known paywalled site, no archive link posted yet.")
    else:
        click.echo(f"Paywalled: no ({result.site or 'unknown site'})")


@main.command()
@click.argument("url")
@output_option
def comments(url: str, output):
    """Extract a thread's comments as a Markdown list"""
    _check_thread_url(url)
    try:
        markdown = CommentExtractor().extract_comments(url)
    except RuntimeError as e:
        _fail(e)

    with _output_stream(output) as output_file:
        click.echo(markdown, file=output_file)


@main.command()
@click.argument("url")
@click.option("--images/--no-images", default=True, help="Keep image references (default: keep)")
@click.option("--remove", "remove_selectors", multiple=True, help="CSS selector of elements to drop; repeatable")
@click.option("--raw", is_flag=True, default=False, help="Skip link-block removal and title heading")
@output_option
def markdown(url: str, images: bool, remove_selectors, raw: bool, output):
    """Convert a web page to clean Markdown"""
    options = ConversionOptions(
        include_images=images,
        remove_selectors=list(remove_selectors),
        remove_consecutive_links=not raw,
        add_title_heading=not raw,
    )
    try:
        document = MarkdownConverter().url_to_clean_markdown(url, options)
    except RuntimeError as e:
        _fail(e)

    with _output_stream(output) as output_file:
        click.echo(document.markdown, file=output_file)


@main.command()
@click.argument("prompt", required=False)
@model_option
@click.option("--temperature", default=0.1, type=click.FloatRange(0, 2), help="Sampling temperature (default: 0.1)")
@click.option("--max-tokens", default=None, type=click.IntRange(1), help="Upper limit on generated tokens")
def ask(prompt, model: str, temperature: float, max_tokens):
    """Send a prompt to the LLM (reads stdin when PROMPT is omitted)"""
    if not prompt:
        prompt = click.get_text_stream("stdin").read()
    prompt = prompt.strip()
    if not prompt:
        raise click.UsageError("Prompt cannot be empty")

    parameters = {"temperature": temperature}
    if max_tokens:
        parameters["max_tokens"] = max_tokens

    try:
        answer = OpenRouterClient().ask(prompt, model=model, parameters=parameters)
    except RuntimeError as e:
        _fail(e)

    click.echo(answer)


@main.command("summarize-comments")
@click.argument("url")
@click.option("--instructions", "-i", default=None, help="Custom instructions replacing the default analysis prompt")
@model_option
@fallback_option
@output_option
def summarize_comments(url: str, instructions, model: str, fallback: bool, output):
    """Summarize a discussion thread with the LLM"""
    _check_thread_url(url)
    try:
        summary = DiscussionSummarizer(_summarizer_config(model, fallback)).summarize(url, instructions)
    except RuntimeError as e:
        _fail(e)

    with _output_stream(output) as output_file:
        click.echo(summary, file=output_file)


@main.command("summarize-article")
@click.argument("url")
@click.option("--instructions", "-i", default=None, help="Custom instructions replacing the default summary prompt")
@model_option
@fallback_option
@output_option
def summarize_article(url: str, instructions, model: str, fallback: bool, output):
    """Summarize a web page with the LLM"""
    try:
        summary = ArticleSummarizer(_summarizer_config(model, fallback)).summarize(url, instructions)
    except RuntimeError as e:
        _fail(e)

    with _output_stream(output) as output_file:
        click.echo(summary, file=output_file)


@main.command()
@click.option("--count", "-c", default=10, type=click.IntRange(1, 100), help="Number of top stories (default: 10)")
@click.option("--summarize/--no-summarize", default=False, help="Summarize each article with the LLM (default: off)")
@model_option
@fallback_option
@output_option
def digest(count: int, summarize: bool, model: str, fallback: bool, output):
    """Build a Markdown digest of the top stories"""
    click.echo(f"Building digest of the top {count} Hacker News stories...", err=True)
    try:
        entries = HackerNewsDigest(summarize=summarize, config=_summarizer_config(model, fallback)).build(count)
    except RuntimeError as e:
        _fail(e)

    with _output_stream(output) as output_file:
        if not entries:
            click.echo("No posts found.", file=output_file)
            return
        _write_digest_markdown(entries, output_file)


if __name__ == "__main__":
    main()
