from rest_framework.throttling import SimpleRateThrottle


class LoginRateThrottle(SimpleRateThrottle):
    scope = 'login'  # Matches the 'login' key in DEFAULT_THROTTLE_RATES

    def get_cache_key(self, request, view):
        ident = self.get_ident(request)
        # Per IP and username, so one client cannot cycle through accounts
        username = request.data.get('username', '')
        if username:
            return f"login_throttle_{ident}_{username}"
        return f"login_throttle_{ident}"


class EvaluationSubmitThrottle(SimpleRateThrottle):
    scope = 'evaluation_submit'

    def get_cache_key(self, request, view):
        return f"evaluation_submit_throttle_{self.get_ident(request)}"
