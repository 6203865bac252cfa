# thankswall/models/report.py
from thankswall import db
from datetime import datetime


class Report(db.Model):
    __tablename__ = 'reports'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'thanks_id', name='uq_report_user_thanks'),
    )

    # Só existe PENDING por enquanto; resolver/descartar ainda não foi implementado
    STATUS_PENDING = 'PENDING'

    id = db.Column(db.Integer, primary_key=True)
    reason = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), default=STATUS_PENDING, nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    thanks_id = db.Column(db.Integer, db.ForeignKey('thanks.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    reporter = db.relationship('User', backref=db.backref('reports', lazy='dynamic'))

    def to_dict(self):
        return {
            'id': self.id,
            'reason': self.reason,
            'status': self.status,
            'thanksId': self.thanks_id,
            'user': self.reporter.to_public_dict() if self.reporter else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<Report {self.thanks_id} - {self.status}>'
