from collections import namedtuple
from datetime import datetime

from thankswall import db

MEDIA_TYPES = ('image', 'video')


class ThanksTarget(namedtuple('ThanksTarget', ['kind', 'id'])):
    """Destino de um agradecimento: uma empresa OU um usuário"""

    COMPANY = 'company'
    USER = 'user'

    @classmethod
    def company(cls, company_id):
        return cls(cls.COMPANY, company_id)

    @classmethod
    def user(cls, user_id):
        return cls(cls.USER, user_id)


class Thanks(db.Model):
    __tablename__ = 'thanks'
    # Exatamente um destino: empresa ou usuário
    __table_args__ = (
        db.CheckConstraint(
            '(company_id IS NULL) <> (target_user_id IS NULL)',
            name='ck_thanks_single_target'
        ),
        db.Index('ix_thanks_feed_latest', 'is_approved', 'created_at', 'id'),
        db.Index('ix_thanks_feed_popular', 'is_approved', 'like_count', 'created_at', 'id'),
    )

    id = db.Column(db.Integer, primary_key=True)
    text = db.Column(db.Text, nullable=False)
    media_url = db.Column(db.String(500))
    media_type = db.Column(db.String(10))  # image, video
    like_count = db.Column(db.Integer, default=0, nullable=False)
    is_approved = db.Column(db.Boolean, default=False, nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    company_id = db.Column(db.Integer, db.ForeignKey('companies.id'))
    target_user_id = db.Column(db.Integer, db.ForeignKey('users.id'))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relacionamentos
    author = db.relationship('User', foreign_keys=[user_id],
                             backref=db.backref('thanks', lazy='dynamic'))
    target_user = db.relationship('User', foreign_keys=[target_user_id],
                                  backref=db.backref('received_thanks', lazy='dynamic'))
    likes = db.relationship('Like', backref='thanks', lazy='dynamic', cascade='all, delete-orphan')
    comments = db.relationship('Comment', backref='thanks', lazy='dynamic', cascade='all, delete-orphan')
    reports = db.relationship('Report', backref='thanks', lazy='dynamic', cascade='all, delete-orphan')

    @property
    def target(self):
        if self.company_id is not None:
            return ThanksTarget.company(self.company_id)
        if self.target_user_id is not None:
            return ThanksTarget.user(self.target_user_id)
        return None

    @target.setter
    def target(self, target):
        if target.kind == ThanksTarget.COMPANY:
            self.company_id, self.target_user_id = target.id, None
        elif target.kind == ThanksTarget.USER:
            self.company_id, self.target_user_id = None, target.id
        else:
            raise ValueError(f'Destino inválido: {target.kind}')

    def to_dict(self, comment_count=None, liked_by_me=None):
        data = {
            'id': self.id,
            'text': self.text,
            'mediaUrl': self.media_url,
            'mediaType': self.media_type,
            'likeCount': self.like_count,
            'isApproved': self.is_approved,
            'userId': self.user_id,
            'companyId': self.company_id,
            'targetUserId': self.target_user_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
            'user': self.author.to_public_dict() if self.author else None,
            'company': self.company.to_summary_dict() if self.company else None,
            'targetUser': self.target_user.to_public_dict() if self.target_user else None,
        }
        if comment_count is not None:
            data['commentCount'] = comment_count
        if liked_by_me is not None:
            data['likedByMe'] = liked_by_me
        return data

    def __repr__(self):
        return f'<Thanks {self.id} by {self.user_id}>'


class Like(db.Model):
    __tablename__ = 'likes'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'thanks_id', name='uq_like_user_thanks'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    thanks_id = db.Column(db.Integer, db.ForeignKey('thanks.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<Like {self.user_id} -> {self.thanks_id}>'


class Comment(db.Model):
    __tablename__ = 'comments'

    id = db.Column(db.Integer, primary_key=True)
    text = db.Column(db.Text, nullable=False)
    is_approved = db.Column(db.Boolean, default=False, nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    thanks_id = db.Column(db.Integer, db.ForeignKey('thanks.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    author = db.relationship('User', backref=db.backref('comments', lazy='dynamic'))

    def to_dict(self):
        return {
            'id': self.id,
            'text': self.text,
            'isApproved': self.is_approved,
            'thanksId': self.thanks_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'user': self.author.to_public_dict() if self.author else None,
        }

    def __repr__(self):
        return f'<Comment {self.id} on {self.thanks_id}>'
