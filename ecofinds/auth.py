import logging
from functools import wraps

from flask import current_app, g, request
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from .errors import AuthError, StoreError, ValidationError
from .models import Profile, User, db, utcnow
from .validators import clean_email, clean_password, clean_str, clean_username

logger = logging.getLogger(__name__)

TOKEN_SALT = 'ecofinds-auth'

FRIENDLY_AUTH_MESSAGES = {
    'Invalid login credentials': 'Invalid email or password. Please try again.',
    'Email not confirmed': 'Please confirm your email address before signing in.',
}


def friendly_auth_message(message):
    for known, friendly in FRIENDLY_AUTH_MESSAGES.items():
        if known in message:
            return friendly
    return message


def _serializer():
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=TOKEN_SALT)


def issue_token(user):
    return _serializer().dumps({'uid': user.id})


def verify_token(token):
    """Return the User a bearer token was issued for, or raise AuthError."""
    try:
        payload = _serializer().loads(token, max_age=current_app.config['TOKEN_MAX_AGE'])
    except SignatureExpired:
        raise AuthError('Invalid token')
    except BadSignature:
        raise AuthError('Invalid token')
    user = db.session.get(User, payload.get('uid'))
    if user is None:
        raise AuthError('Invalid token')
    return user


def bearer_required(f):
    @wraps(f)
    def wrapped(*args, **kwargs):
        header = request.headers.get('Authorization', '')
        scheme, _, token = header.partition(' ')
        if scheme.lower() != 'bearer' or not token.strip():
            raise AuthError('Unauthorized')
        g.current_user = verify_token(token.strip())
        return f(*args, **kwargs)
    return wrapped


def upsert_profile(user_id, username, avatar_url=None, commit=True):
    """Insert the profile row for ``user_id`` or update it in place."""
    profile = db.session.get(Profile, user_id)
    if profile is None:
        profile = Profile(id=user_id, username=username, avatar_url=avatar_url)
        db.session.add(profile)
    else:
        profile.username = username
        if avatar_url is not None:
            profile.avatar_url = avatar_url or None
        profile.updated_at = utcnow()
    if commit:
        db.session.commit()
    return profile


def signup(email, password, username):
    email = clean_email(email)
    password = clean_password(password)
    username = clean_username(username)
    if User.query.filter_by(email=email).first():
        raise ValidationError('Email already registered.')

    pw_hash = generate_password_hash(password)
    retries = max(1, current_app.config['PROFILE_WRITE_RETRIES'])
    for attempt in range(1, retries + 1):
        try:
            user = User(email=email, password_hash=pw_hash)
            db.session.add(user)
            db.session.flush()
            profile = upsert_profile(user.id, username, commit=False)
            db.session.commit()
            logger.info(f"Created account {user.id} for {username}")
            return user, profile
        except OperationalError as e:
            db.session.rollback()
            logger.warning(f"Signup write failed (attempt {attempt}/{retries}): {e}")
        except IntegrityError:
            # a concurrent signup claimed the email after the lookup above
            db.session.rollback()
            raise ValidationError('Email already registered.')
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Signup write failed: {e}")
            raise StoreError('Internal server error during signup')
    raise StoreError('Internal server error during signup')


def authenticate(email, password):
    email = clean_str(email, 'email').strip().lower()
    password = clean_str(password, 'password')
    user = User.query.filter_by(email=email).first()
    if not user or not check_password_hash(user.password_hash, password):
        raise AuthError(friendly_auth_message('Invalid login credentials'))
    return user
