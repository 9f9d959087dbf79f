"""Server-rendered HTML views."""

from functools import partial
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from liquidtrack.api.view_state import ViewState, filter_issues
from liquidtrack.domain.issues import PEOPLE, Issue, IssueStatus, find_person
from liquidtrack.i18n import Language, status_label, text
from liquidtrack.services.sync import IssueSynchronizer

TEMPLATES_DIR = Path(__file__).parent / "templates"

SCHEMA_SQL = """create table issues (
  id bigint generated by default as identity primary key,
  title text not null,
  description text,
  status text default 'New',
  created_at timestamp with time zone default timezone('utc'::text, now()),
  updated_at timestamp with time zone default timezone('utc'::text, now()),
  responsible_id text,
  ai_analysis text
);
alter publication supabase_realtime add table issues;"""


def format_date(issue: Issue, lang: Language) -> str:
    """Format an issue's creation date for the given language."""
    return issue.created_at.strftime(text(lang, "date_format"))


jinja_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=True,
    undefined=StrictUndefined,
)
jinja_env.globals.update(
    people=PEOPLE,
    statuses=tuple(IssueStatus),
    find_person=find_person,
    status_label=status_label,
    format_date=format_date,
)


def render_setup(state: ViewState) -> str:
    """Render the configuration-missing screen."""
    return _render("setup.html", state, schema_sql=SCHEMA_SQL)


def render_loading(state: ViewState) -> str:
    """Render the placeholder shown while the session is resolved."""
    return _render("loading.html", state, refresh_seconds=1)


def render_auth(state: ViewState) -> str:
    """Render the sign-in / sign-up view."""
    return _render("auth.html", state)


def render_tracker(state: ViewState, synchronizer: IssueSynchronizer) -> str:
    """Render the issue list with its toolbar and creation form."""
    return _render(
        "tracker.html",
        state,
        issues=filter_issues(synchronizer.issues, state.search_term),
        alert=state.take_alert(),
        synchronizer=synchronizer,
    )


def _render(template_name: str, state: ViewState, **context: object) -> str:
    template = jinja_env.get_template(template_name)
    return template.render(
        state=state,
        lang=state.language,
        t=partial(text, state.language),
        **context,
    )
