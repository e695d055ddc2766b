from openid_rp.middleware.request_id import RequestIDFilter, RequestIDMiddleware, request_id_var

__all__ = ["RequestIDFilter", "RequestIDMiddleware", "request_id_var"]
