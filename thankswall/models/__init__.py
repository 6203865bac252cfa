# Importar todos os models
from .user import User, UserFollow
from .company import Company, FollowCompany
from .thanks import Thanks, ThanksTarget, Like, Comment
from .report import Report

__all__ = ['User', 'UserFollow', 'Company', 'FollowCompany', 'Thanks', 'ThanksTarget',
           'Like', 'Comment', 'Report']
