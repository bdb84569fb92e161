from pathlib import Path
from jinja2 import Environment, FileSystemLoader

from thumbnail import resolve

_CSS_PATH = Path(__file__).parent / "static" / "style.css"
env = Environment(loader=FileSystemLoader(Path(__file__).parent / "templates"),
                  autoescape=True)
env.filters["thumbnail"] = resolve


def site_to_html(data: dict, inline: bool = True) -> str:
    """Render site data → standalone HTML page.  If inline=True, embed CSS in a <style> tag."""
    css_inline = _CSS_PATH.read_text(encoding="utf-8") if inline else ""
    return env.get_template("portfolio.html").render(site=data, inline_css=css_inline)
