from thankswall import db
from flask_login import UserMixin
from datetime import datetime
import bcrypt


class User(UserMixin, db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    name = db.Column(db.String(100))
    image = db.Column(db.String(500))
    bio = db.Column(db.Text)
    phone = db.Column(db.String(30))
    location = db.Column(db.String(100))
    website = db.Column(db.String(200))
    password_hash = db.Column(db.String(128))  # Vazio para contas só OAuth
    is_admin = db.Column(db.Boolean, default=False, nullable=False)
    user_type = db.Column(db.String(50))
    profession = db.Column(db.String(100))
    work_area = db.Column(db.String(100))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def set_password(self, password):
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    def check_password(self, password):
        if not self.password_hash or not password:
            return False
        try:
            return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))
        except ValueError:
            return False

    def to_public_dict(self):
        """Campos públicos do perfil (sem email/telefone)"""
        return {
            'id': self.id,
            'name': self.name,
            'image': self.image,
        }

    def to_profile_dict(self):
        data = self.to_public_dict()
        data.update({
            'email': self.email,
            'bio': self.bio,
            'phone': self.phone,
            'location': self.location,
            'website': self.website,
            'isAdmin': self.is_admin,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        })
        return data

    def __repr__(self):
        return f'<User {self.email}>'


class UserFollow(db.Model):
    __tablename__ = 'user_follows'
    __table_args__ = (
        db.UniqueConstraint('follower_id', 'following_id', name='uq_user_follow'),
        db.CheckConstraint('follower_id <> following_id', name='ck_user_follow_not_self'),
    )

    id = db.Column(db.Integer, primary_key=True)
    follower_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    following_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<UserFollow {self.follower_id} -> {self.following_id}>'
