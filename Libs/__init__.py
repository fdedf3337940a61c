# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .Networking import global_request
from .errors     import StreamError, Unauthenticated, NotFound, AccessDenied, RateLimited, ValidationFailed, UpstreamUnavailable, upstream_call
