import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
        ('contacts', '0001_initial'),
        ('deals', '0001_initial'),
        ('automations', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Activity',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('note', 'Note'), ('call', 'Call'), ('task', 'Task')], db_index=True, max_length=10)),
                ('body', models.TextField()),
                ('due_at', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('status', models.CharField(blank=True, choices=[('todo', 'To do'), ('in_progress', 'In progress'), ('done', 'Done')], help_text='Tasks only', max_length=20, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('reminder_sent_at', models.DateTimeField(blank=True, help_text='When the overdue reminder was logged', null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('assigned_user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assigned_activities', to=settings.AUTH_USER_MODEL)),
                ('contact', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='activities', to='contacts.contact')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_activities', to=settings.AUTH_USER_MODEL)),
                ('deal', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='activities', to='deals.deal')),
                ('template', models.ForeignKey(blank=True, help_text='Sent when the task is completed', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='tasks', to='automations.automationtemplate')),
                ('tenant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='activities', to='core.tenant')),
            ],
            options={
                'verbose_name': 'Activity',
                'verbose_name_plural': 'Activities',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['tenant', 'type', '-created_at'], name='activity_tenant_type_idx'),
                    models.Index(fields=['tenant', 'status'], name='activity_tenant_status_idx'),
                    models.Index(fields=['assigned_user', 'status'], name='activity_assignee_status_idx'),
                ],
            },
        ),
    ]
