"""Error taxonomy tags reported in `BrokenLinkRecord.error_type`."""


class ErrorType:
    NOT_FOUND = "404"
    SERVER_ERROR = "500"
    FORBIDDEN = "forbidden"
    UNAUTHORIZED = "unauthorized"
    HTTP_ERROR = "http_error"

    DNS_ERROR = "dns_error"
    CONNECTION_REFUSED = "connection_refused"
    TIMEOUT = "timeout"
    SSL_ERROR = "ssl_error"
    REDIRECT_LOOP = "redirect_loop"
    NETWORK_ERROR = "network_error"

    NAVIGATION_ERROR = "navigation_error"
