from __future__ import annotations

from marshmallow import Schema, fields, validate, validates, ValidationError

from ...services.social.content_formatter import TWITTER_MAX_CHARS


class PublishAttemptResultSchema(Schema):
    account_id = fields.Str(data_key="accountId")
    platform = fields.Str()
    success = fields.Bool()
    post_id = fields.Str(data_key="postId", allow_none=True)
    post_url = fields.Str(data_key="postUrl", allow_none=True)
    error = fields.Str(allow_none=True)
    error_kind = fields.Str(data_key="errorKind", allow_none=True)
    published_at = fields.DateTime(data_key="publishedAt", allow_none=True)


class PublishResponseSchema(Schema):
    success = fields.Bool(required=True)
    perAccountResults = fields.Dict(
        keys=fields.Str(),
        values=fields.Nested(PublishAttemptResultSchema),
    )
    errors = fields.List(fields.Str())


class EnqueueResponseSchema(Schema):
    success = fields.Bool(required=True)
    post_id = fields.Str(data_key="postId")
    job_id = fields.Str(data_key="jobId", allow_none=True)
    message = fields.Str()


class TwitterThreadRequestSchema(Schema):
    tweets = fields.List(
        fields.Str(required=True, validate=validate.Length(min=1)),
        required=True,
        validate=validate.Length(min=1),
    )

    @validates("tweets")
    def validate_tweet_lengths(self, value, **kwargs):
        too_long = [i for i, t in enumerate(value) if len(t) > TWITTER_MAX_CHARS]
        if too_long:
            raise ValidationError(
                f"Tweets at positions {too_long} exceed {TWITTER_MAX_CHARS} characters"
            )


class TwitterThreadResponseSchema(Schema):
    success = fields.Bool(required=True)
    result = fields.Nested(PublishAttemptResultSchema)
    thread_ids = fields.List(fields.Str(), data_key="threadIds")
