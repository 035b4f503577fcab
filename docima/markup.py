"""HTML fragment assembly around an inline base64 image.

Layout:
    <img a1="v1" a2="v2" src="data:image/png;base64,PAYLOAD">

With a wrapper element:
    <div w1="wv1"><img ... src="data:image/png;base64,PAYLOAD"></div>

Attributes keep their configured order. Values are inserted verbatim: no
HTML escaping is applied, so callers must pass values that are already safe
for a double-quoted attribute. Untrusted values can inject markup.
"""

from typing import Iterable, Optional, Tuple

from .encoding.raster import PNG_MIME

Attribute = Tuple[str, str]


def data_uri(payload: str, mime: str = PNG_MIME) -> str:
    """Inline data reference for a base64 payload."""
    return f"data:{mime};base64,{payload}"


def render_attributes(attributes: Iterable[Attribute]) -> str:
    """Render `name="value"` pairs, each preceded by a space."""
    return ''.join(f' {name}="{value}"' for name, value in attributes)


def assemble(
    payload: str,
    attributes: Iterable[Attribute] = (),
    wrapper: Optional[str] = None,
    wrapper_attributes: Iterable[Attribute] = (),
    mime: str = PNG_MIME
) -> str:
    """Build the fragment for a base64 image payload.

    Parameters
    ----------
    payload : str
        base64 text of the encoded raster
    attributes : Iterable[Attribute]
        <img> attributes, rendered before `src`
    wrapper : str, optional
        Wrapper element name; None or "" for no wrapper
    wrapper_attributes : Iterable[Attribute]
        Wrapper attributes; ignored without a wrapper
    mime : str
        Media type in the data URI, default image/png

    Returns
    -------
    str
        The markup fragment

    Examples
    --------
    >>> assemble("AAAA", [("alt", "x")], "div", [("id", "w1")])
    '<div id="w1"><img alt="x" src="data:image/png;base64,AAAA"></div>'
    """
    img = f'<img{render_attributes(attributes)} src="{data_uri(payload, mime)}">'
    if not wrapper:
        return img
    return f'<{wrapper}{render_attributes(wrapper_attributes)}>{img}</{wrapper}>'
