from decouple import config

# Email (Resend)
RESEND_API_KEY = config("RESEND_API_KEY", default="re_...")
RESEND_WEBHOOK_SECRET = config("RESEND_WEBHOOK_SECRET", default="whsec_dGVzdA==")
DEFAULT_FROM_EMAIL = config("DEFAULT_FROM_EMAIL", default="Guestlist <tickets@example.com>")

# SMS (Twilio)
TWILIO_ACCOUNT_SID = config("TWILIO_ACCOUNT_SID", default="AC...")
TWILIO_AUTH_TOKEN = config("TWILIO_AUTH_TOKEN", default="twilio-auth-token")
TWILIO_PHONE_NUMBER = config("TWILIO_PHONE_NUMBER", default="+15555550100")
# Public URL Twilio posts status callbacks to; used to validate the request signature.
TWILIO_STATUS_CALLBACK_URL = config("TWILIO_STATUS_CALLBACK_URL", default="")

MESSAGING_DRY_RUN = config("MESSAGING_DRY_RUN", default=False, cast=bool)
