# thankswall/routes/thanks.py
from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from thankswall.services.company_service import pagination_meta
from thankswall.services.engagement_service import EngagementService
from thankswall.services.feed_service import FEED_MODES, MEDIA_FILTERS, FeedService
from thankswall.services.moderation_service import ModerationService
from thankswall.services.thanks_service import UNSET, ThanksService
from thankswall.utils.decorators import current_user_id
from thankswall.utils.validation import get_json_body, parse_int, validate_choice

bp = Blueprint('thanks', __name__, url_prefix='/thanks')


def feed_take(value):
    return parse_int(
        value, 'take',
        default=current_app.config['FEED_DEFAULT_PAGE_SIZE'],
        maximum=current_app.config['FEED_MAX_PAGE_SIZE'],
        clamp=True,
    )


@bp.route('', methods=['GET'])
def list_thanks():
    """Feed global: ?mode=latest|popular&companySlug&media&q&take&cursor"""
    mode = validate_choice(request.args.get('mode'), 'mode', FEED_MODES, default='latest')
    media = request.args.get('media') or None
    if media:
        validate_choice(media, 'media', MEDIA_FILTERS)
    viewer_id = current_user_id()

    page = FeedService.list_thanks(
        mode=mode,
        company_slug=request.args.get('companySlug') or None,
        media=media,
        q=request.args.get('q'),
        take=feed_take(request.args.get('take')),
        cursor=request.args.get('cursor') or None,
        viewer_id=viewer_id,
    )

    return jsonify({
        'thanks': FeedService.serialize(page, viewer_id),
        'pagination': {
            'nextCursor': page['next_cursor'],
            'hasNextPage': page['has_next_page'],
        },
    })


@bp.route('', methods=['POST'])
@login_required
def create_thanks():
    data = get_json_body(request)
    target = ThanksService.parse_target(data)
    thanks = ThanksService.create_thanks(
        author_id=current_user.id,
        target=target,
        text=data.get('text'),
        media_url=data.get('mediaUrl'),
        media_type=data.get('mediaType'),
    )
    return jsonify(thanks.to_dict()), 201


@bp.route('/<int:thanks_id>', methods=['GET'])
def get_thanks(thanks_id):
    viewer = current_user if current_user.is_authenticated else None
    thanks = ThanksService.get_thanks_for_viewer(thanks_id, viewer)
    viewer_id = current_user_id()
    page = FeedService.build_page([thanks], viewer_id)
    return jsonify(FeedService.serialize(page, viewer_id)[0])


@bp.route('/<int:thanks_id>', methods=['PATCH'])
@login_required
def update_thanks(thanks_id):
    data = get_json_body(request)
    thanks = ThanksService.update_thanks(
        thanks_id,
        current_user.id,
        text=data.get('text'),
        media_url=data['mediaUrl'] if 'mediaUrl' in data else UNSET,
        media_type=data['mediaType'] if 'mediaType' in data else UNSET,
    )
    return jsonify(thanks.to_dict())


@bp.route('/<int:thanks_id>', methods=['DELETE'])
@login_required
def delete_thanks(thanks_id):
    ThanksService.delete_thanks(thanks_id, current_user.id)
    return jsonify({'success': True})


@bp.route('/<int:thanks_id>/like', methods=['POST'])
@login_required
def toggle_like(thanks_id):
    return jsonify(EngagementService.toggle_like(thanks_id, current_user.id))


@bp.route('/<int:thanks_id>/comments', methods=['GET'])
def list_comments(thanks_id):
    page = parse_int(request.args.get('page'), 'page', default=1)
    size = parse_int(request.args.get('size'), 'size', default=20,
                     maximum=current_app.config['FEED_MAX_PAGE_SIZE'], clamp=True)
    comments, total = EngagementService.list_comments(thanks_id, page=page, size=size)
    return jsonify({
        'comments': [c.to_dict() for c in comments],
        'pagination': pagination_meta(page, size, total),
    })


@bp.route('/<int:thanks_id>/comments', methods=['POST'])
@login_required
def create_comment(thanks_id):
    data = get_json_body(request)
    comment = EngagementService.create_comment(thanks_id, current_user.id, data.get('text'))
    return jsonify({
        'message': 'Comentário enviado! Ele aparecerá após a aprovação.',
        'comment': comment.to_dict(),
    }), 201


@bp.route('/<int:thanks_id>/report', methods=['POST'])
@login_required
def report_thanks(thanks_id):
    data = get_json_body(request)
    report = ModerationService.create_report(thanks_id, current_user.id, data.get('reason'))
    return jsonify({
        'message': 'Denúncia enviada. Obrigado por ajudar a manter a comunidade segura.',
        'reportId': report.id,
    }), 201
