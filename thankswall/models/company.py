from thankswall import db
from datetime import datetime


class Company(db.Model):
    __tablename__ = 'companies'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    slug = db.Column(db.String(120), unique=True, nullable=False, index=True)
    logo_url = db.Column(db.String(500))
    category = db.Column(db.String(50))
    is_approved = db.Column(db.Boolean, default=False, nullable=False)
    # Contato informado no formulário de cadastro:
    # {"contactName": "...", "phone": "...", "email": "...", "appliedAt": "2026-10-19T12:00:00"}
    application_data = db.Column(db.JSON)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relacionamentos
    thanks = db.relationship('Thanks', backref='company', lazy='dynamic', cascade='all, delete-orphan')
    followers = db.relationship('FollowCompany', backref='company', lazy='dynamic', cascade='all, delete-orphan')

    def to_summary_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'logoUrl': self.logo_url,
            'category': self.category,
        }

    def to_dict(self):
        data = self.to_summary_dict()
        data.update({
            'isApproved': self.is_approved,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        })
        return data

    def __repr__(self):
        return f'<Company {self.slug}>'


class FollowCompany(db.Model):
    __tablename__ = 'company_follows'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'company_id', name='uq_company_follow'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    company_id = db.Column(db.Integer, db.ForeignKey('companies.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<FollowCompany {self.user_id} -> {self.company_id}>'
