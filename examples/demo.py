"""Demo: build a Request from a simulated WSGI environ and print what handlers see."""
import io
import json
from pprint import pprint

from reqview import from_wsgi

body = json.dumps({"title": "Hello", "count": 3}).encode()
environ = {
    "REQUEST_METHOD": "POST",
    "PATH_INFO": "/users",
    "QUERY_STRING": "active=1&page=1",
    "CONTENT_TYPE": "application/json",
    "CONTENT_LENGTH": str(len(body)),
    "HTTP_X_REQUESTED_WITH": "XMLHttpRequest",
    "wsgi.input": io.BytesIO(body),
}

request = from_wsgi(environ)

print("method:", request.method())
print("uri:", request.uri())
print("path:", request.path())
print("isAjax:", "yes" if request.is_ajax() else "no")
print("query page:", request.query("page"))
print("input title:", request.input("title"))
pprint(request.all())
